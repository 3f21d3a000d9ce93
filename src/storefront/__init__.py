"""Aara storefront backend: catalogue, pricing, checkout and back-office."""
