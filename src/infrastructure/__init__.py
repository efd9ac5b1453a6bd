"""Infrastructure Layer.

Adapters that implement domain ports: file I/O for placement scenarios and
alternative geometry kernels.
"""
