"""
Test suite for the BioCyc object mapper

All tests run offline: the web-service transport is replaced by stub fetch
functions or by patching ``httpx.get``.
"""
