"""
Integration tests for the approval expiry reminder.

Exercise the handler, store queries and SES delivery together
against moto-mocked AWS services.
"""
