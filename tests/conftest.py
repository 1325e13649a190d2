"""Shared pytest fixtures for maestro tests."""

import io
import json
import zipfile
from collections.abc import Callable
from pathlib import Path

import pytest

from maestro.codegen import FileWriter
from maestro.templating import TemplateRenderer
from maestro.visitor import MigrationParameters

LICENSE = """/*
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

ACME_MODEL = """/**
 * Vehicle network
 */
namespace org.acme

enum Colour {
  o RED
  o BLUE
}

participant Person identified by personId {
  o String personId
  o String name
}

asset Vehicle identified by vin {
  o String vin
  o Colour colour optional
  o Double mileage default=0.0 range=[0.0,]
  o String[] tags optional
  --> Person owner
}

transaction Transfer {
  --> Vehicle vehicle
  --> Person newOwner
}

event Transferred {
  --> Vehicle vehicle
}
"""

SALES_MODEL = """namespace org.acme.sales

import org.acme.Vehicle

transaction Sale {
  --> Vehicle vehicle
  o Double price
}
"""

TRANSFER_SCRIPT = (
    LICENSE
    + """

/* global getAssetRegistry getFactory emit */

/**
 * Transfer a vehicle to a new owner
 * @param {org.acme.Transfer} tx
 * @transaction
 */
async function transfer(tx) {
    tx.vehicle.owner = tx.newOwner;
    const registry = await getAssetRegistry('Vehicle');
    await registry.update(tx.vehicle);
    const event = getFactory().newEvent('org.acme', 'Transferred');
    event.vehicle = tx.vehicle;
    emit(event);
}
"""
)

REPAINT_SCRIPT = """/**
 * @param {org.acme.Repaint} tx
 * @transaction
 */
async function repaint(tx) {
    const registry = await getAssetRegistry('org.acme.Vehicle');
    await registry.update(tx.vehicle);
}
"""


def build_bna(
    models: dict[str, str] | None = None,
    scripts: dict[str, str] | None = None,
    package: dict | None = None,
    extra: dict[str, str] | None = None,
) -> bytes:
    """Build the bytes of a business network archive."""
    package = package if package is not None else {
        "name": "vehicle-network",
        "version": "0.1.2",
        "description": "A vehicle network",
    }
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as bundle:
        bundle.writestr("package.json", json.dumps(package))
        for name, text in (extra or {}).items():
            bundle.writestr(name, text)
        for name, text in (models or {}).items():
            bundle.writestr(name, text)
        for name, text in (scripts or {}).items():
            bundle.writestr(name, text)
    return buffer.getvalue()


@pytest.fixture
def make_bna(tmp_path: Path) -> Callable[..., Path]:
    """Return a factory writing .bna files into tmp_path."""
    counter = iter(range(1000))

    def _make(**kwargs) -> Path:
        path = tmp_path / f"network-{next(counter)}.bna"
        path.write_bytes(build_bna(**kwargs))
        return path

    return _make


@pytest.fixture
def vehicle_bna(make_bna: Callable[..., Path]) -> Path:
    """Archive with one user model and one script."""
    return make_bna(
        models={"models/org.acme.cto": ACME_MODEL},
        scripts={"lib/logic.js": TRANSFER_SCRIPT},
    )


@pytest.fixture
def output_dir(tmp_path: Path) -> Path:
    return tmp_path / "output"


@pytest.fixture
def parameters(output_dir: Path) -> MigrationParameters:
    """Migration parameters with the bundled templates."""
    return MigrationParameters(
        file_writer=FileWriter(output_dir),
        renderer=TemplateRenderer(),
    )


@pytest.fixture
def acme_model() -> str:
    return ACME_MODEL


@pytest.fixture
def sales_model() -> str:
    """Model in a second namespace that imports from org.acme."""
    return SALES_MODEL


@pytest.fixture
def transfer_script() -> str:
    return TRANSFER_SCRIPT


@pytest.fixture
def repaint_script() -> str:
    return REPAINT_SCRIPT


@pytest.fixture
def license_header() -> str:
    return LICENSE


@pytest.fixture
def bna_bytes() -> Callable[..., bytes]:
    """Return the in-memory archive builder."""
    return build_bna
