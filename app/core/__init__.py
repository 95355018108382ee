"""
Core building blocks shared by the domains: DDD base classes and the
dependency injection container.
"""
