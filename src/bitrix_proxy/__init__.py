"""Bitrix24 tool proxy: semantic CRM tools translated into Bitrix24 REST calls."""

__version__ = "1.0.0"
