"""Storefront services: money helpers, read models, repositories, account."""
