"""Business logic services.

Pure scoring core (normalize, dedup, trust, matching, ranking, explain) plus
the query and ingestion services that feed it. Query services take the
database session explicitly and sample the clock once per request.
"""
