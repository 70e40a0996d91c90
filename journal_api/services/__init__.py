"""
Journal API: Services Layer
===========================

What:  Business rules between the routes (HTTP) and the models (persistence).
How:   Services take an AsyncSession per call and own the transaction
       boundary; routes never commit.

Service Inventory:
    - CredentialService: bcrypt password hashing, JWT issue/verify
    - AccountService:    signup, signin, list accounts, delete own account
    - EntryService:      principal-scoped CRUD over journal entries
"""
