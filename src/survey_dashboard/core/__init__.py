"""
Core data and analytics layer.

This package contains:
- csv_normalizer: header discovery and row-to-record mapping for raw exports
- survey_loader: resolve a survey type to its export and load it
- aggregator: question classification, distributions, executive summary
- narrative: summary paragraph built from the executive summary numbers
"""
