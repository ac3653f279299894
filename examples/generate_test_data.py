import csv
import os
import random

if not os.path.exists("data"):
    os.mkdir("data")

if not os.path.exists("data/flights.csv"):
    carriers = ["AA", "DL", "UA", "B6", "EV", "WN", "US", "MQ"]
    origins = ["JFK", "LGA", "EWR"]
    flights = []
    for i in range(10000):
        month = random.randint(1, 12)
        day = random.randint(1, 28)
        distance = random.randint(80, 4983)
        air_time = max(20, int(distance / random.uniform(6.5, 8.5)))
        dep_delay = int(random.expovariate(1 / 12)) - 5
        if random.random() < 0.001:
            # A handful of flights left the day after.
            dep_delay = random.randint(1000, 1300)
        arr_delay = dep_delay + random.randint(-20, 20)
        flights.append(
            [
                2013,
                month,
                day,
                dep_delay,
                arr_delay,
                random.choice(carriers),
                random.choice(origins),
                air_time,
                distance,
            ]
        )

    with open("data/flights.csv", "w", newline="") as f:
        writer = csv.writer(f)
        writer.writerow(
            [
                "year",
                "month",
                "day",
                "dep_delay",
                "arr_delay",
                "carrier",
                "origin",
                "air_time",
                "distance",
            ]
        )
        writer.writerows(flights)
