"""
Adventure Backend Test Suite

Test structure:
- unit/: Test components in isolation with mocks
- integration/: Test the HTTP API end to end with only litellm mocked
- mocks/: Mock completion functions for testing
"""
