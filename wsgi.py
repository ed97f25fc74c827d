from es2tabular import create_app
from es2tabular.settings import load_config, configure_logging

config_data = load_config()
configure_logging(config_data)

app = create_app(config_data)

if __name__ == "__main__":
    app.run(debug=True, host="127.0.0.1", port=3000, threaded=True, use_reloader=False)
