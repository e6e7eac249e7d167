"""
Snippetbox - Services Layer
============================

What:  Storage access sitting between handlers (HTTP) and the database.

Service Inventory:
    - SnippetStore (protocol): what handlers may ask of storage
    - SnippetService: SQLAlchemy implementation over the pooled engine
"""
