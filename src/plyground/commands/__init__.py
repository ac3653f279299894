"""Shell commands exposing Plyground functionalities.

Run
===

``plyground-run`` runs a query plan serialized as JSON on local files::

    plyground-run -t flights=flights.csv delayed.json

Where ``delayed.json`` contains the plan, as produced by
:meth:`plyground.LazyFrame.to_dict`::

    {"type": "filter",
     "predicate": {"type": "call", "op": ">", "args": [
         {"type": "column", "name": "dep_delay"},
         {"type": "literal", "value": 1000}]},
     "child": {"type": "source", "table": "flights"}}

It can be tried on the provided example data with::

    plyground-run -t flights=examples/data/flights.csv examples/data/delayed.json
"""
