"""
Generic helpers, not specific to the Kubernetes domain: typing, versions.
"""
