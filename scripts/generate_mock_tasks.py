import uuid

import numpy as np
import pandas as pd

TIME_SLOTS = ["8-10 AM", "10-12 PM", "2-4 PM", "4-6 PM"]


def generate_mock_tasks(num_tasks=40, output_file="mock_tasks.csv", seed=None):
    """
    Generates a task-store-shaped dataset (same columns the sheet endpoint returns)
    around the laundry in Bengaluru, so the coordinator can be exercised offline.
    A few rows are deliberately broken (missing / combined coordinates) to
    exercise the catalog's row normalization.
    """
    rng = np.random.default_rng(seed)

    # Center on the fallback home base (lat, lng)
    CENTER_LAT = 12.935
    CENTER_LNG = 77.614

    data = []
    for task_index in range(num_tasks):
        # Customers within ~6km (roughly 0.055 degrees)
        lat = CENTER_LAT + rng.uniform(-0.055, 0.055)
        lng = CENTER_LNG + rng.uniform(-0.055, 0.055)

        row = {
            "id": task_index + 1,
            "name": f"Customer {str(uuid.uuid4())[:6]}",
            "timeSlot": rng.choice(TIME_SLOTS),
            "type": rng.choice(["Pick", "Drop"], p=[0.5, 0.5]),
            "lat": np.round(lat, 6),
            "lng": np.round(lng, 6),
            "latlng": "",
            "assignedDriver": "",
        }

        # ~10% of rows only carry the combined "lat,lng" column
        if rng.random() < 0.1:
            row["latlng"] = f"{row['lat']},{row['lng']}"
            row["lat"] = None
            row["lng"] = None
        # ~5% of rows have no usable location at all
        elif rng.random() < 0.05:
            row["lat"] = None

        data.append(row)

    df = pd.DataFrame(data)
    df.to_csv(output_file, index=False)
    print(f"Generated {num_tasks} tasks and saved to '{output_file}'")

    print("\nTasks per time slot:")
    for slot, count in df["timeSlot"].value_counts().items():
        print(f"  {slot}: {count}")


if __name__ == "__main__":
    generate_mock_tasks(num_tasks=40)
