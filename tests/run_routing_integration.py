from config import load_settings
from routing.ors_client import RoutingClient
from routing.models import RoutingError
from presentation.formatting import format_summary

def main():
    settings = load_settings()
    if not settings.ors_api_key:
        print("ORS_API_KEY is not set; nothing to do.")
        return

    client = RoutingClient.from_settings(settings)

    laundry = (77.614, 12.935)   # (lng, lat)
    stops = [
        (77.5946, 12.9716),
        (77.6101, 12.9352),
        (77.6245, 12.9279),
    ]

    try:
        result = client.route([laundry, *stops, laundry])
    except RoutingError as exc:
        print(f"\nRouting failed after {client.last_request.attempts} attempt(s): {exc.reason}")
        return

    print(f"\nReturned {len(result.features)} feature(s) in {client.last_request.attempts} attempt(s)\n")
    print(format_summary(result.summary))

    leg = client.route_leg(laundry, stops[0])
    print()
    print(format_summary(leg.summary, title="ETA", empty="No summary"))

if __name__ == "__main__":
    main()
