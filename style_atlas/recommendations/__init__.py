"""
Recommendation engine: nearest styles to a point on the normalized map.

Modules
-------
ranker  : recommend() + euclidean_distance() + rank1_product_ids(), pure
          functions, no I/O.
contour : contour() — mean-radius ring around the query point for one rank.
"""
