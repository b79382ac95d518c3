from pytest import fixture


@fixture
def app():
    from openhim_mediators.app import create_app
    app = create_app(testing=True)
    app.config['FHIR_BASE_URL'] = "http://fhir:8080/fhir"
    app.config['OPENHIM_API_URL'] = "https://openhim:8080"
    app.config['OPENHIM_USERNAME'] = "root@openhim.org"
    app.config['OPENHIM_PASSWORD'] = "openhim-password"
    return app


@fixture
def client(app):
    with app.test_client() as c:
        yield c
