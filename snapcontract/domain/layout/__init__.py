"""Layout domain - page-break planning for paginated output"""
