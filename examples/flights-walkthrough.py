"""Explore the flights dataset with lazy dplyr verbs.

Run ``python generate_test_data.py`` first to create ``data/flights.csv``.
"""

import logging

from plyground import col, config, connect, desc, mean, n

config.set_log_level(logging.INFO)

with connect("local") as sc:
    flights = sc.read_csv("flights", "data/flights.csv")

    # Nothing runs until the result is printed or collected.
    print(flights.select("year", "month", "day", "arr_delay", "dep_delay"))
    print(flights.filter(col("dep_delay") > 1000))
    print(flights.arrange(desc("dep_delay")))
    print(flights.summarise(mean_dep_delay=mean("dep_delay")))
    print(flights.mutate(speed=col("distance") / col("air_time") * 60))

    # Chaining verbs only grows the plan.
    c4 = (
        flights.filter(col("month") == 5, col("day") == 17, ~col("carrier").is_null())
        .select("carrier", "dep_delay", "arr_delay")
        .arrange("carrier", "dep_delay")
        .mutate(air_time_gain=col("dep_delay") - col("arr_delay"))
    )
    print(c4.explain())
    print(c4)

    delay = (
        flights.group_by("carrier")
        .summarise(count=n(), dist=mean("distance"), delay=mean("arr_delay"))
        .filter(col("count") > 20, col("dist") < 2000)
        .arrange(desc("delay"))
        .collect()
    )
    print(delay)

# The collected result is local and outlives the session.
print(delay.to_pydict()["carrier"])
