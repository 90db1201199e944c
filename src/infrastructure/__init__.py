"""Infrastructure Layer.

Adapters that implement domain ports. This layer owns storage concerns;
the domain never touches arrays or host APIs directly.
"""
