"""
Test suite for the Doctors Portal booking API.

Contains unit tests for slot availability and integration tests for the
HTTP endpoints.
"""
import os

# Set environment for testing
os.environ["TESTING"] = "1"
