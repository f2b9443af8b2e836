"""Test utilities for perch applications::

    from perch.testing import TestClient
"""

from perch.testing.client import ClientResponse, TestClient

__all__ = ["ClientResponse", "TestClient"]
