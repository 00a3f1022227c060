"""
Authentication strategies: the sources of credentials for the API client.

Each strategy is a :class:`kubecrud._cogs.structs.credentials.CredentialProvider`.
The client does not care which one is used, as long as it can produce
the normalised credential context.
"""
