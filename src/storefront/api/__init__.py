"""HTTP plumbing shared by every context's routers."""
