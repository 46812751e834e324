"""Geotagger Processing Modules

This package contains all processing modules of the cell-site geotagger.
Each module implements the ModuleProcessor interface: the zone aggregator
builds the DR zone layer offline and the site classifier geotags site batches.
"""
