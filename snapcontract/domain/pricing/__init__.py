"""Pricing domain - catalog configuration and the pricing engine"""
