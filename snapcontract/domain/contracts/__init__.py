"""Contracts domain - contract state, mutation dispatcher and form endpoints"""
