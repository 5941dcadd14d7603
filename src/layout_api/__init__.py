"""HTTP front end for graph_layout runs."""
