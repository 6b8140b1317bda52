"""HTTP adapter – async carrier HTTP client with SMS error mapping."""
from smskit.adapters.http.client import HttpClient, HttpxHttpClient

__all__ = ["HttpClient", "HttpxHttpClient"]
