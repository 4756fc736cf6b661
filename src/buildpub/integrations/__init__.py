"""
buildpub.integrations - External Service Integrations
=======================================================

Sub-packages:
    - repository: Remote artifact repository clients (in-memory, HTTP)
"""
