from neurolens_web.app_factory import create_app

if __name__ == "__main__":
    app = create_app()
    app.run(host=app.config["HOST"], port=app.config["PORT"], debug=app.config["DEBUG"])

#############################
#
# Key design patterns used
# •	Application Factory: create_app() builds the app and dependencies.
# •	Dependency Injection (manual): encoder, client and session repository are passed into the blueprint.
# •	Service Layer: FileEncoder, GeminiAnalysisClient and AnalysisSession each own one step of a run.
# •	Repository: SessionRepository owns the in-memory session per browser.
# •	Strategy: AnalysisClient lets the remote model client be swapped (tests use a fake).
######################################################################
# Runtime request flow
# •	GET /            renders the session state (idle form, analyzing, error, report)
# •	POST /analyze    encode batch -> AnalysisSession.run -> redirect to /
# •	POST /reset      any state -> idle
# •	GET /api/session JSON snapshot of the session
# ________________________________________
