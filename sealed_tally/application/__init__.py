"""Application layer - ports and use-case services for Sealed Tally."""
