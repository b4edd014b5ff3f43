"""Document access and text helpers for the extractor."""
