"""Identity and access control core."""
