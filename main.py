"""Simple entrypoint to run the WeatherWear pipeline locally."""

import json

from evaluation.scenarios import SCENARIOS
from wear_app.app import WeatherWearApp


def main() -> None:
    app = WeatherWearApp()
    scenario = SCENARIOS[0]
    result = app.recommend(scenario.snapshot)
    print(
        json.dumps(
            {
                "location": scenario.snapshot.location,
                "recommendations": [recommendation.to_dict() for recommendation in result["recommendations"]],
                "outfit": result["outfit"].to_dict(),
            },
            indent=2,
        )
    )


if __name__ == "__main__":
    main()
