"""
Script transformer.

Transaction scripts in a business network call ledger functions such as
``getAssetRegistry`` as ambient globals. In the migrated project those
functions are methods of the contract class, and each script function
becomes a method of that class. The rewrite is a fixed, ordered list of
literal replacements applied to the whole source text; it has no knowledge
of strings or comments.

Running the transformer twice is not a no-op for call sites:
``this.getAssetRegistry(`` still contains ``getAssetRegistry(`` and is
prefixed again.
"""

LICENSE_HEADER = """/*
 * Licensed under the Apache License, Version 2.0 (the "License");
 * you may not use this file except in compliance with the License.
 * You may obtain a copy of the License at
 *
 * http://www.apache.org/licenses/LICENSE-2.0
 *
 * Unless required by applicable law or agreed to in writing, software
 * distributed under the License is distributed on an "AS IS" BASIS,
 * WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
 * See the License for the specific language governing permissions and
 * limitations under the License.
 */"""

GLOBALS_DIRECTIVE = "/* global getAssetRegistry getFactory emit */"

# Applied in order
SUBSTITUTIONS: tuple[tuple[str, str], ...] = (
    ("getAssetRegistry(", "this.getAssetRegistry("),
    ("getFactory()", "this.getFactory()"),
    ("emit(", "this.emit("),
    ("async function", "async"),
    (LICENSE_HEADER, ""),
    (GLOBALS_DIRECTIVE, ""),
)


def transform_script(source: str) -> str:
    """
    Rewrite a transaction script into the body of contract methods.

    Args:
        source: Script text as read from the archive

    Returns:
        The rewritten text; tokens that are absent are left alone
    """
    for old, new in SUBSTITUTIONS:
        source = source.replace(old, new)
    return source
