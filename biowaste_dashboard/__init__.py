"""
Bio-waste Performance Dashboards: metrics core

Analytics backend turning monthly bio-waste collection records into
stakeholder-ready bundles (CEO, CFO, Councillor, Operational, Bee2Waste):
KPI cards, the GIS composite quality index, CO2 avoidance and semaphores.

To swap the simulated data for a real feed:
    Build a WasteDataset from database or warehouse queries instead of
    simulator.generate_dataset(). The table schemas stay unchanged and
    every dashboard function keeps working.

To connect to a front end:
    Call dashboards.compute_ceo_metrics(dataset, DashboardFilter(...)) (or
    any sibling) and render the returned dict of KpiCards and DataFrames.

To add a GIS indicator:
    Add an entry to config.GIS_INDICATORS with its domain, invert flag and
    weight, rebalance the weights to sum to 1.0, and pass the new raw value
    through gis_index.calculate_gis_index.
"""
