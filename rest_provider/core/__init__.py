"""Core legacy user provider logic.

Module Structure:
    - http/               : HTTP client, auth strategies, transport errors
    - strategy_factory.py : Strategy selection and private key parsing
    - legacy_user.py      : Legacy user record
    - user_service.py     : Lookup and password validation
    - exceptions.py       : Provider error types

Usage Pattern:
    Import explicitly when needed:
        from rest_provider.core.user_service import RestUserService
        from rest_provider.core.http import HttpClient, BearerTokenHttpClientStrategy
"""
