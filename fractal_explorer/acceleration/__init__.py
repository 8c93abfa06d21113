"""Render kernels and the parallel row-band scheduler."""
