"""Customer upsert used by checkout."""

from protean.exceptions import ObjectNotFoundError

from storefront.identity.customer.customer import Customer, normalize_email


def upsert_customer(domain, email, name=None, phone=None) -> Customer:
    """Find the customer for ``email`` or register one; refresh the name when given.

    Must run inside the caller's unit of work.
    """
    repo = domain.repository_for(Customer)
    try:
        customer = repo._dao.find_by(email=normalize_email(email))
    except ObjectNotFoundError:
        customer = Customer.register(email=email, name=name, phone=phone)
    else:
        customer.rename(name)

    repo.add(customer)
    return customer
