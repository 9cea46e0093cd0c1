"""FIPS Finder: faceted browsing of the IT products and services catalog."""
