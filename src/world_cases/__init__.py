"""
world_cases
-----------

Builds the bilingual, date-indexed COVID-19 world dataset and the enriched
world map from the JHU CSSE time-series tables.
"""

__version__ = "0.1.0"
