#!/usr/bin/env python3
"""
OData metadata to Zod/TypeScript schema generator.

Reads an EDMX metadata document (from a file or a service's $metadata
endpoint) and writes one TypeScript module with a Zod schema, a create type
and an update type per entity exposed by the service.
"""

import argparse
import os
import sys
from dotenv import load_dotenv

from odata_codegen_lib import CodeGenerator, CodegenError, GenerationPolicy, supported_languages
from odata_codegen_lib.constants import DEFAULT_LANGUAGE, DEFAULT_OUTPUT_FILE


def print_trace_info(generator: CodeGenerator, model, output_path: str):
    """Print which entities would be generated, without writing anything."""
    schema = model.schema_
    entities = generator.resolved_entities(model)
    # Emit once so that emitter diagnostics (complex properties) are collected too
    generator.generate(model)

    print("=" * 80)
    print("OData Codegen Trace Information")
    print("=" * 80)
    print(f"\nSchema Namespace: {schema.namespace or 'Not provided'}")
    print(f"Entity Container: {schema.entity_container.name or 'Not provided'}")
    print(f"Target Language: {generator.language}")
    print(f"Output File: {output_path}")

    print("\nMetadata Summary:")
    print(f"   Entity Types: {len(schema.entity_types)}")
    print(f"   Complex Types: {len(schema.complex_types)}")
    print(f"   Enum Types: {len(schema.enum_types)}")
    print(f"   Entity Sets: {len(schema.entity_container.entity_sets)}")

    print("\nPolicy:")
    print(f"   Excluded Entities: {', '.join(sorted(generator.policy.excluded_entities)) or 'None'}")
    print(f"   Read-only on Create: {', '.join(sorted(generator.policy.read_only_on_create)) or 'None'}")
    print(f"   Read-only on Update: {', '.join(sorted(generator.policy.read_only_on_update)) or 'None'}")
    print(f"   Complex Type Prefixes: {', '.join(generator.policy.complex_type_prefixes) or 'None'}")

    print(f"\nEntities to Generate ({len(entities)} total):")
    for name in entities:
        print(f"   - {name}")

    diagnostics = generator.diagnostics
    print(f"\nDiagnostics ({len(diagnostics)} total):")
    for message in diagnostics:
        print(f"   - {message}")

    print("\n" + "=" * 80)
    print("Trace complete - no file was written")
    print("=" * 80)


def main(argv=None):
    """Main entry point."""
    # Load environment variables from .env file
    load_dotenv()

    parser = argparse.ArgumentParser(
        description="Generate Zod/TypeScript schemas from OData (EDMX) metadata",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter  # Show defaults in help
    )
    parser.add_argument("metadata", nargs='?', help="Path to the metadata XML file (overrides ODATA_METADATA_FILE env var)")
    parser.add_argument("--service", help="URL of an OData service to fetch $metadata from (alternative to a metadata file)")
    parser.add_argument("-o", "--out", default=DEFAULT_OUTPUT_FILE, help="Output file path")
    parser.add_argument("--lang", default=DEFAULT_LANGUAGE, choices=supported_languages(), help="Language to generate")
    parser.add_argument("--policy", help="JSON file with excluded entities and read-only fields (overrides ODATA_CODEGEN_POLICY env var)")
    parser.add_argument("-u", "--user", help="Username for basic authentication with --service (overrides ODATA_USER env var)")
    parser.add_argument("-p", "--password", help="Password for basic authentication with --service (overrides ODATA_PASS env var)")
    # Allow --debug as alias for --verbose
    parser.add_argument("-v", "--verbose", "--debug", dest="verbose", action="store_true", help="Enable verbose output to stderr")
    parser.add_argument("--trace", action="store_true", help="Print the entities that would be generated and exit without writing")

    args = parser.parse_args(argv)

    # --- Configuration Handling ---
    # Priority: CLI argument > Environment Variable > .env file
    input_path = args.metadata
    service_url = args.service
    if not input_path and not service_url:
        input_path = os.getenv("ODATA_METADATA_FILE")
        if input_path and args.verbose: print("[VERBOSE] Using ODATA_METADATA_FILE from environment.", file=sys.stderr)
    if not input_path and not service_url:
        service_url = os.getenv("ODATA_URL") or os.getenv("ODATA_SERVICE_URL")
        if service_url and args.verbose: print("[VERBOSE] Using ODATA_URL from environment.", file=sys.stderr)

    if input_path and service_url:
        print("ERROR: Provide either a metadata file or --service, not both.", file=sys.stderr)
        return 1
    if not input_path and not service_url:
        # Error, print regardless of verbosity
        print("ERROR: No metadata source provided.", file=sys.stderr)
        print("Provide a metadata XML file, the --service flag, or the ODATA_METADATA_FILE / ODATA_URL environment variables.", file=sys.stderr)
        parser.print_help(file=sys.stderr)
        return 1

    auth = None
    if service_url:
        final_user = args.user if args.user is not None else (os.getenv("ODATA_USER") or os.getenv("ODATA_USERNAME"))
        final_pass = args.password if args.password is not None else (os.getenv("ODATA_PASS") or os.getenv("ODATA_PASSWORD"))
        if final_user and final_pass:
            auth = (final_user, final_pass)
            if args.verbose: print(f"[VERBOSE] Using basic authentication for user: {final_user}", file=sys.stderr)
        elif args.verbose:
            print("[VERBOSE] No authentication provided or configured. Attempting anonymous access.", file=sys.stderr)

    policy_file = args.policy or os.getenv("ODATA_CODEGEN_POLICY")

    try:
        policy = GenerationPolicy.from_file(policy_file) if policy_file else GenerationPolicy()
        if policy_file and args.verbose:
            print(f"[VERBOSE] Loaded generation policy from {policy_file}", file=sys.stderr)

        generator = CodeGenerator(language=args.lang, policy=policy, verbose=args.verbose)
        model = generator.load(input_path=input_path, service_url=service_url, auth=auth)

        if args.trace:
            print_trace_info(generator, model, args.out)
            return 0

        text = generator.generate(model)
        output_path = generator.write(text, args.out)
    except CodegenError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1
    except OSError as e:
        print(f"ERROR: Could not write output file {args.out}: {e}", file=sys.stderr)
        return 1

    if args.verbose:
        print(f"[VERBOSE] Generated {len(generator.resolved_entities(model))} entities into {output_path}", file=sys.stderr)
    return 0


if __name__ == "__main__":
    sys.exit(main())
