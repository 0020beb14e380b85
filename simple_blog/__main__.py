from simple_blog.main import run

run()
