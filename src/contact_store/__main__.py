from contact_store.cli import app

app(prog_name="contact-store")
