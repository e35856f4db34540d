"""Legal aggregates (Director, Board, ShareholderRegister, Company), their
events and the incorporation factory."""
