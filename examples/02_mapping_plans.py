"""
Example 02: Mapping Plans

This example demonstrates declaring an explicit, validated field mapping
instead of relying on matching names.
"""

from dataclasses import dataclass

from plumbline import ObjectMapper, PlanCompilationError, map_to
from plumbline.mapping import mapping


@dataclass
class Employee:
    """Employee entity"""
    employee_no: int
    first_name: str
    department: str
    salary: float


@dataclass
class EmployeeCard:
    """Public employee card"""
    id: int = 0
    first_name: str = ""
    department: str = ""
    salary: float = 0.0


def main():
    print("=== Mapping Plans ===\n")

    plan = (
        mapping(Employee, EmployeeCard)
        .auto_fields()
        .field("id", "employee_no")
        .ignore("salary")
        .strict()
        .build()
    )
    print("1. Compiled plan:")
    for dest, src in plan.field_map.items():
        print(f"   {dest:<12} <- {src}")
    print()

    staff = [
        Employee(17, "Alice", "Research", 81000.0),
        Employee(23, "Bob", "Support", 52000.0),
    ]

    print("2. Mapping with a plan:")
    for card in map_to(staff, list[EmployeeCard], plan=plan):
        print(f"   {card}")
    print()

    print("3. Reusable mapper:")
    mapper = ObjectMapper(EmployeeCard, plan=plan)
    print(f"   {mapper.map_one(staff[0])}\n")

    print("4. Plans are validated at build time:")
    try:
        mapping(Employee, EmployeeCard).field("id", "badge_no").build()
    except PlanCompilationError as e:
        print(f"   Rejected: {e}")


if __name__ == "__main__":
    main()
