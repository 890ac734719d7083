"""CRUD demo client for a Databricks Delta products table."""

__version__ = "0.1.0"
