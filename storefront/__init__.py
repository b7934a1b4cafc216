"""Auto-parts storefront backend."""
