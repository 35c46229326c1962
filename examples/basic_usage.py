#!/usr/bin/env python3
"""Example of basic PTU calculator usage."""

from azure_ptu_calculator import PtuCalculator, RecommendationPolicy, get_tables


def print_quote(calculator, model, deployment, usage):
    """Print the recommendation for one workload.

    Args:
        calculator: PtuCalculator to quote with
        model: Model identifier
        deployment: Deployment type value
        usage: Raw usage figures, as entered in a form
    """
    quote = calculator.quote(model, deployment, usage)
    result = quote.result

    print(f"Model: {model} ({deployment})")
    if not result.has_valid_data:
        print("  No usage data\n")
        return

    print(f"  Calculated PTU: {result.calculated_ptu}")
    print(f"  Actual PTU: {result.actual_ptu}{' (minimum applied)' if result.is_using_minimum else ''}")
    print(f"  Monthly PTU cost: ${result.monthly_ptu_cost:,.2f}")
    print(f"  Monthly PAYGO cost: ${result.monthly_paygo_cost:,.2f}")
    print(f"  Recommendation: {result.recommendation.label}")

    cheapest = quote.analysis.cheapest_plan()
    print(f"  Cheapest plan: {cheapest.name} at ${cheapest.monthly_cost:,.2f}/month")
    print()


def main():
    """Run the example."""
    tables = get_tables()
    calculator = PtuCalculator(tables)

    print_quote(calculator, "gpt-4o-mini", "global", {"avgTPM": "1000000", "recommendedPTU": "25"})
    print_quote(calculator, "gpt-4o", "regional", {"avgTPM": "20000", "p99TPM": "60000"})
    print_quote(calculator, "gpt-4o", "global", {"avgTPM": "abc"})

    # Price PAYGO from the workload's own input ratio instead of a 50/50 split,
    # and round the PTU count up to a purchasable increment
    strict = PtuCalculator(tables, RecommendationPolicy(paygo_baseline="split", enforce_increment=True))
    print_quote(strict, "gpt-4o", "global", {"avgTPM": "45000", "inputOutputRatio": "0.8"})


if __name__ == "__main__":
    main()
