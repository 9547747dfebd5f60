"""
PassVault - Personal Password Manager

Sign in with email + password, then keep a list of site credentials
(site, username, password, category, notes) in your own collection.

Components:
- generator.py: Password generation, strength scoring, validation
- models.py: Credential / CredentialFormData records and categories
- store.py: SQLite-backed document collections
- crypto.py: scrypt + HKDF key derivation, AES-GCM field sealing
- auth.py: Email/password identity provider with session listeners
- credentials.py: Per-user credential CRUD and search
- config.py: Paths, collection names, logging setup

Usage:
    python pv_main.py                 # Interactive menu
"""

__version__ = "0.1.0"
