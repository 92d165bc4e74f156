"""Share domain - compact state codec and self-contained share links"""
