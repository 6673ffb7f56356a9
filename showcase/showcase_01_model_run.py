"""
Showcase 01: ModelRun End-to-End Workflow

This showcase walks through the outputs of one NONMEM run:
1. Parse the listing into a Report
2. Read the .ext iteration history
3. Discover and read $TABLE outputs
4. Parse a folder of listings concurrently

Requirements:
- Sample run in tests/data (run1.mod and its outputs)

Usage:
    python showcase/showcase_01_model_run.py [path/to/run.mod]
"""

import logging
import sys
from pathlib import Path

logging.basicConfig(level=logging.INFO, format='%(levelname)s %(name)s: %(message)s')

print("=" * 80)
print("SHOWCASE 01: ModelRun End-to-End Workflow")
print("=" * 80)

# === Step 1: Setup ===

print("\n[Step 1] Importing modules...")
from nonmem_text import ModelRun, parse_many
from nonmem_text.types import ReportSections

model_path = Path(sys.argv[1]) if len(sys.argv) > 1 else Path(__file__).parent.parent / 'tests' / 'data' / 'run1.mod'
run = ModelRun(model_path)
print(f"  Model: {run.model_path}")
print(f"  Linked files: {[p.name for p in run.linked_files()]}")
print(f"  Known report sections: {len(ReportSections.list_available())}")

# === Step 2: Report ===

print("\n[Step 2] Parsing listing...")
report = run.report()
if report.is_empty:
    print("  No data in listing")
else:
    print(f"  Status: {report.termination_status.value}")
    print(f"  Method: {report.estimation_method}")
    print(f"  OFV: {report.objective_function_value}")
    print(f"  THETA: {report.parameter_vectors.theta}")
    print(f"  THETA labels: {report.theta_labels}")
    print(f"  THETA initial: {report.initial_estimates.theta}")
    print(f"  THETA SE: {report.standard_errors.theta_se}")
    print(f"  OMEGA: {report.parameter_vectors.omega}")
    print(f"  SIGMA: {report.parameter_vectors.sigma}")
    print(f"  ETA shrinkage (%): {report.shrinkage}")
    if report.termination_text:
        print(f"  Termination: {report.termination_text.splitlines()[0]}")
    if report.condition_number is not None:
        print(f"  Condition number: {report.condition_number:.2f}")
    if report.zero_gradient:
        print("  ⚠ Zero gradient at final iteration")

# === Step 3: Iterations ===

print("\n[Step 3] Reading iteration history...")
if run.ext_path.exists():
    iterations = run.iterations()
    for section in iterations:
        obj = section.summary.get('OBJ')
        print(f"  {section.method}: {len(section.rows)} iterations")
        if obj is not None:
            print(f"    OBJ {obj.first} -> {obj.last}")
else:
    print(f"  No {run.ext_path.name}")

# === Step 4: Tables ===

print("\n[Step 4] Reading $TABLE outputs...")
for path in run.table_files():
    table = run.table(path.name)
    print(f"  {path.name}: {len(table)} rows, columns {table.header}")

# === Step 5: Batch ===

print("\n[Step 5] Parsing all listings in the folder...")
listings = sorted(run.directory.glob('*.lst'))
result = parse_many(listings, use_processes=False)
print(f"  ✓ Parsed: {result.succeeded}, failed: {result.failed}")
for path, error in result.failures.items():
    print(f"  ✗ {path}: {error}")

print("\n" + "=" * 80)
print("SHOWCASE COMPLETE")
print("=" * 80)
