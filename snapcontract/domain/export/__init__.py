"""Export domain - contract preview rendering and PDF export"""
