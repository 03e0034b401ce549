import json
import logging

import click
from flask import Flask, jsonify

from tinydb import TinyDB
from tinydb.storages import MemoryStorage

from zkp.verange.crs import DEFAULT_J, generate_crs
from zkp.verange.prover import prove
from zkp.verange.verifier import verify

from verange_routes import verange_bp, init_verange_bp
from verange_serializers import serialize_crs, serialize_proof

logger = logging.getLogger(__name__)

DEFAULT_CONFIG = {
    "VERANGE_DB_PATH": None,      # None → MemoryStorage
    "VERANGE_J": DEFAULT_J,
    "VERANGE_K": 8,
}


def open_db(path):
    if path is None:
        return TinyDB(storage=MemoryStorage)   # Memory DB
    return TinyDB(path)                        # Storage DB


def create_app(config=None):
    app = Flask(__name__)
    app.config.from_mapping(DEFAULT_CONFIG)
    app.config.from_prefixed_env()
    if config:
        app.config.update(config)

    init_verange_bp(open_db(app.config["VERANGE_DB_PATH"]))
    app.register_blueprint(verange_bp)

    @app.route("/")
    def index():
        return jsonify({
            "service": "verange",
            "J": app.config["VERANGE_J"],
            "K": app.config["VERANGE_K"],
        })

    register_commands(app)
    return app


## CLI commands ##
def register_commands(app):

    @app.cli.command("gen-crs")
    @click.option("--j", "J", default=DEFAULT_J, show_default=True, help="H 생성자 개수")
    @click.option("--out", type=click.Path(dir_okay=False), default=None,
                  help="저장할 JSON 파일 (생략 시 stdout)")
    def gen_crs_command(J, out):
        """투명 설정 CRS를 JSON으로 출력한다."""
        _emit(serialize_crs(generate_crs(J)), out)

    @app.cli.command("gen-example-proof")
    @click.option("--omega", default=5, show_default=True, help="증명할 비밀값")
    @click.option("--j", "J", default=DEFAULT_J, show_default=True)
    @click.option("--k", "K", default=8, show_default=True)
    @click.option("--out", type=click.Path(dir_okay=False), default=None)
    def gen_example_proof_command(omega, J, K, out):
        """예제 증명을 생성하고, 로컬 검증 후 JSON으로 출력한다."""
        crs = generate_crs(J)
        proof = prove(omega, crs, J, K)
        if not verify(proof, crs):
            raise click.ClickException("생성된 증명이 로컬 검증을 통과하지 못했습니다")
        _emit(serialize_proof(proof), out)


def _emit(data, out):
    text = json.dumps(data, indent=2)
    if out is None:
        click.echo(text)
    else:
        with open(out, "w") as f:
            f.write(text + "\n")
        click.echo(f"wrote {out}")


app = create_app()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    app.run(debug=True)
