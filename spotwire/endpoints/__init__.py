"""
Request builders, one module per API resource.

Builders are created through AuthenticatedClient and UserClient
rather than directly.
"""
