"""
Gateway Service: the credential-holding HTTP process.
"""
