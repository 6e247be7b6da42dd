"""HTTP layer over :class:`meridian.service.BackOffice`."""
