"""
Contact Registration App

Receives contact submissions over HTTP:
- Persists each submission to the `registros` table
- Notifies the contact by email and SMS with the identifier and server IP
"""
