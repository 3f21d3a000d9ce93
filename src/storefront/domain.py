"""Storefront domain: composition root.

A single Protean domain hosts the catalogue, promotions, ordering, payments
and identity contexts so that checkout can decrement catalogue stock and
persist the order inside one unit of work.
"""

from protean.domain import Domain

from storefront.utils.logging import configure_logging

configure_logging()

storefront = Domain(name="storefront")
