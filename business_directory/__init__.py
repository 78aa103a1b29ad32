"""Business Directory: listings, reviews, complaints and derived statistics."""
