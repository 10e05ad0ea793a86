#!/usr/bin/env python

from setuptools import find_packages, setup


# The web service is deployed from a checkout with 'manage.py' and a
# 'local_settings.py'; installing the package pulls in its prerequisites.

setup(name="examcenter",
      version="2024.1",
      description="Exam center backend: PC registration, exam login windows "
          "and proctoring",
      long_description=open("README.rst").read(),

      license="MIT",
      python_requires=">=3.10",
      packages=find_packages(exclude=["tests", "tests.*"]),
      py_modules=["manage", "local_settings_example"],
      install_requires=[
          "django>=4.2",
          "granian>=1.0",
          ],
      extras_require={
          "test": [
              "pytest",
              "pytest-django",
              "factory_boy",
              ],
          },
      )
